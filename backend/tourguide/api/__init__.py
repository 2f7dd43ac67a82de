from .routes import get_address_cache, get_geocoder, router

__all__ = ["get_address_cache", "get_geocoder", "router"]
