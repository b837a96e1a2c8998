from scaffoldkit.cli.main import main

main()
