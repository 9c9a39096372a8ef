from iox.cli import main

main()
