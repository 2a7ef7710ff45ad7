from forgebin.cli.app import main

main()
