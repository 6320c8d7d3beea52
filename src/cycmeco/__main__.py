"""
--------------------------------------------------------------------------------
<cycmeco project>
src/cycmeco/__main__.py

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from cycmeco.core.cli import main

if __name__ == "__main__":
    main()
