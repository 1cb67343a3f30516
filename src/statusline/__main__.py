from statusline.cli import main

main()
