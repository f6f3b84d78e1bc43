# main.py imports the handlers package; every module below registers its
# handlers on the shared router created in start.py.

from . import start      # creates the router, /start panel
from . import tracker    # wake / sleep / reset / stats buttons
from . import status     # /status and /stats
from . import admin      # /setstatus and /clear
from . import reactions  # reactions in the tracker chat
