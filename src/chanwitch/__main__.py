from chanwitch.cli import main

main()
