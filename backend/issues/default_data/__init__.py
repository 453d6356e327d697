from .checks import is_empty, no_data
from .errors import AlreadyBootstrapped, DataAlreadyLoaded, DefaultDataError, InvalidConfiguration, RecordInvalid
from .loader import LoadedData, load

__all__ = [
    "AlreadyBootstrapped",
    "DataAlreadyLoaded",
    "DefaultDataError",
    "InvalidConfiguration",
    "LoadedData",
    "RecordInvalid",
    "is_empty",
    "load",
    "no_data",
]
