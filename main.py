# minibooklet/main.py

import os
import sys

# Run from a checkout without installing: make the src layout importable
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "src"))

from minibooklet.app import main

if __name__ == "__main__":
    main()
