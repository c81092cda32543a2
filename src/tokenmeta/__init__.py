"""Create and update Metaplex token metadata from the command line."""
