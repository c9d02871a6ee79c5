"""Attack core: factoring, confinement probing, CRT, kangaroo search."""
