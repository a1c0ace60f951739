"""ASGI application."""

from hotelbook.api.factory import create_app

app = create_app()
