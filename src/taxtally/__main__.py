"""
The main entry point for taxtally, defined in pyproject.toml.

Can also be executed as 'python -m taxtally'.
"""


def main(arglist=None):
    import taxtally
    args = taxtally.cli.parse_args(arglist)
    mod = getattr(taxtally.cli, args.cmd)
    mainmethod = getattr(mod, 'main')

    retval = mainmethod(args)
    raise SystemExit(retval)


if __name__ == '__main__':
    main()
