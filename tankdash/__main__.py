from tankdash.main import main

main()
