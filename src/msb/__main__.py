from msb.cli import main

main()
