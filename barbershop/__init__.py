"""Barbershop booking API: accounts, appointments and Mercado Pago payments"""

__version__ = "1.0.0"
