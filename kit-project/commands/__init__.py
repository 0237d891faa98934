# This file makes the 'commands' directory a Python package
# Importing command modules from here

from . import init
from . import add
from . import commit
from . import log
from . import config
from . import cat_file
from . import hash_object
from . import ls_files
