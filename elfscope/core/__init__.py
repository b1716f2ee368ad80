"""ElfScope core: constants, record models, image facade, inspection engine."""
