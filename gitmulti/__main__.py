from gitmulti.cli import main

main()
