from grid_render.cli import main

if __name__ == "__main__":
    main()
