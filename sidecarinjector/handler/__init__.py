from .configure import *  # noqa
from .mutation import *  # noqa
