import sys

from aceyducey.game.acey_ducey import main

sys.exit(main())
