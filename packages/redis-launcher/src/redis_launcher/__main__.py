"""Allow `python -m redis_launcher`, used to spawn the label updater."""

from redis_launcher.cli.main import main

main()
