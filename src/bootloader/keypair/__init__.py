from bootloader.keypair.updater import KeyPairUpdater, MetadataClient, generate_rsa_key_pair

__all__ = ["KeyPairUpdater", "MetadataClient", "generate_rsa_key_pair"]
