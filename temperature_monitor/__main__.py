"""
使用方式:
    python -m temperature_monitor
"""

from temperature_monitor.main import cli


if __name__ == "__main__":
    cli()
