from custody.api.routes import contract_router, register_custody_error_handlers

__all__ = ["contract_router", "register_custody_error_handlers"]
