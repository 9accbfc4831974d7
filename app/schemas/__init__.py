# Schemas package (re-export feature modules for stable imports)
from .notifications.notification import *
