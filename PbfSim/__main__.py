# -- PbfSim CLI Entry (python -m PbfSim) -- #

from PbfSim.runner import main

main()
