import sys

from fcrypt.cli import main

if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\nProgram terminated by user. 👋"); sys.exit(130)
