"""Resource routers mounted by ``members_api.app.api.router``."""
