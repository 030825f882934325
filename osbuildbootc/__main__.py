from osbuildbootc.cli.cli_handler import main

if __name__ == "__main__":
    main()
