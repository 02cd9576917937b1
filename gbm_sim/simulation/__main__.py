from gbm_sim.simulation.runner import main

main()
