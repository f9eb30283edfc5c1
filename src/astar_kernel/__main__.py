from astar_kernel.cli.main import main

if __name__ == "__main__":  # pragma: no cover
    main()
