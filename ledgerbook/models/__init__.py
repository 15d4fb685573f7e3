# Models Package
# Pydantic Models

from .master import *
from .transaction import *
from .tax import *
from .report import *
from .response import *
from .health import *
