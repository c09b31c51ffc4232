from mileview.cli import main

main()
