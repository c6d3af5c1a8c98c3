from mcp_audio.server import main

if __name__ == "__main__":
    main()
