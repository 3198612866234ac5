from clozemark.cli import main

main()
