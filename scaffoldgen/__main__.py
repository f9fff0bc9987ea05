from scaffoldgen.cli import main

main()
