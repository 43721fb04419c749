import sys

from pulsar_sim.app import main

sys.exit(main())
