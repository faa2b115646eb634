from gemini_bridge.server import main

if __name__ == "__main__":
    # BRIDGE_TARGET_URL=http://localhost:11434/v1 python main.py
    main()
