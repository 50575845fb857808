"""Allow ``python -m backup_projects``."""

from backup_projects.cli import main

if __name__ == "__main__":
    main()
