from .chan import *
from .scope import *
from .providers import *
from .race import *
