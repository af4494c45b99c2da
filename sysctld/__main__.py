from sysctld.cli import main

main()
