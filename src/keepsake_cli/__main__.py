from keepsake_cli import main

main()
