# This file makes the 'models' directory a Python package.

from .participant import Participant
