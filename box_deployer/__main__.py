from box_deployer.cli import deploy

if __name__ == "__main__":  # pragma: no cover
    deploy()
