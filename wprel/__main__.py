from wprel.cli.app import main

main()
