"""Domain packages: accounts, bookings and payments"""
