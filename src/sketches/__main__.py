from sketches.cli import main

main()
