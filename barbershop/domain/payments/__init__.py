"""Payments domain - Mercado Pago PIX charges and card checkouts"""
