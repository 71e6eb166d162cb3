# This file makes the 'commands' directory a Python package
# Importing command modules from here

from . import log
from . import config
