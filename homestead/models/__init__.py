# Import all models so they're registered with Base.metadata
from homestead.models.location import Location
from homestead.models.neighborhood import Neighborhood
from homestead.models.property import Property
from homestead.models.property_unit import PropertyUnit
from homestead.models.image_records import PropertyImage, UnitImage
from homestead.models.image_storage import ImageStorage
from homestead.models.feature import Feature
from homestead.models.inquiry import Inquiry
from homestead.models.audit_log import AuditLog

__all__ = [
    "Location",
    "Neighborhood",
    "Property",
    "PropertyUnit",
    "PropertyImage",
    "UnitImage",
    "ImageStorage",
    "Feature",
    "Inquiry",
    "AuditLog",
]
