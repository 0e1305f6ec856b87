import sys

from .hand_tracker_app import main

sys.exit(main())
