# restbreak reminds you to take tiny and big breaks while working at the
# computer.

# Copyright (C) 2026  restbreak contributors

# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.

# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.
"""restbreak reminds you to take tiny and big breaks while working at the
computer.
"""

import logging
import signal
import sys

from restbreak import translations
from restbreak.application import RestBreak
from restbreak.config import Config
from restbreak.model import RestBreakError


def main():
    """Start restbreak."""
    signal.signal(signal.SIGINT, signal.SIG_DFL)  # Handle Ctrl + C

    translations.setup()

    try:
        config = Config.load()
    except RestBreakError as e:
        logging.error("Unable to start restbreak: %s", e)
        sys.exit(1)

    rest_break = RestBreak(config)
    sys.exit(rest_break.run(sys.argv))


if __name__ == "__main__":
    main()
