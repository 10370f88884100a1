"""
Custom template filters for BMS documents.
"""
from django import template
from decimal import Decimal, InvalidOperation

from apps.core.utils import format_currency

register = template.Library()


@register.filter(name='currency')
def currency(value):
    """
    Format an amount as Philippine pesos.

    Usage: {{ amount|currency }}
    Result: ₱1,234,567.89
    """
    try:
        return format_currency(value)
    except (ValueError, TypeError, InvalidOperation):
        return value


@register.filter(name='percent')
def percent(value, places=2):
    """
    Format a number as a percentage.

    Usage: {{ rate|percent }}
    Result: 45.50%
    """
    try:
        return f"{Decimal(str(value or 0)):.{int(places)}f}%"
    except (ValueError, TypeError, InvalidOperation):
        return value

