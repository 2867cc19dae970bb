from .models import Driver, DriverStatus

__all__ = ["Driver", "DriverStatus"]
