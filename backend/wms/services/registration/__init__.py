from .service import RegistrationService

__all__ = ["RegistrationService"]
