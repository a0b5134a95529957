"""
Main entrypoint for the execution of simulations.

The experimental settings of the simulations are managed via [Hydra](https://github.com/facebookresearch/hydra).
The root configuration file is located at `src/epideux/configs/simulation/config.yaml`. All settings
provided via commandline will override the ones loaded through the configuration files.
"""
import datetime
import logging
import os
import time
import typing
from pathlib import Path

import hydra
from omegaconf import DictConfig

from epideux.model import Model
from epideux.scenarios import build_scenario
from epideux.utils.constants import DEFAULT_REPORT_INTERVAL_HOURS
from epideux.utils.utils import dump_conf, dump_reports, log, parse_configuration


@hydra.main(config_path="configs/simulation", config_name="config", version_base=None)
def main(conf: DictConfig):
    """
    Enables command line execution of the simulator.

    Args:
        conf (DictConfig): yaml configuration file
    """

    # -------------------------------------------------
    # -----  Load the experimental configuration  -----
    # -------------------------------------------------
    conf = parse_configuration(conf)

    # -------------------------------------
    # -----  Create Output Directory  -----
    # -------------------------------------
    if conf["outdir"] is None:
        conf["outdir"] = str(Path.cwd() / "output")

    timenow = datetime.datetime.now().strftime("%Y%m%d-%H%M%S")
    conf["outdir"] = "{}/{}_people-{}_days-{}_seed-{}_{}".format(
        conf["outdir"],
        conf["scenario"],
        conf["n_people"],
        conf["simulation_days"],
        conf["seed"],
        timenow,
    )
    os.makedirs(conf["outdir"], exist_ok=True)
    logfile = f"{conf['outdir']}/log_{timenow}.txt"

    # ----------------------------
    # -----  Run Simulation  -----
    # ----------------------------
    log(f"scenario: {conf['scenario']}", logfile)
    log(f"seed: {conf['seed']}", logfile)

    process_start = time.time()
    model = simulate(
        scenario=conf["scenario"],
        n_people=conf["n_people"],
        start_time=conf["start_time"],
        simulation_days=conf["simulation_days"],
        seed=conf["seed"],
        conf=conf,
        logfile=logfile,
    )
    log(f"Simulation took {time.time() - process_start:.2f} s", logfile)

    # write the full configuration file and the reports
    dump_conf(conf, "{}/full_configuration.yaml".format(conf["outdir"]))
    dump_reports(model.get_daily_reports(), "{}/seir_reports.json".format(conf["outdir"]))

    if conf["PLOT"]:
        from matplotlib import pyplot as plt
        from epideux.plotting.plot_seir import plot_seir
        fig = plot_seir(model.get_daily_reports(), path="{}/seir.png".format(conf["outdir"]), title=conf["scenario"])
        plt.close(fig)

    return conf


def simulate(
    scenario: str = "single_home",
    n_people: int = 1000,
    start_time: datetime.datetime = datetime.datetime(2020, 4, 1, 0, 0),
    simulation_days: int = 60,
    seed: int = 0,
    conf: typing.Optional[typing.Dict] = None,
    logfile: str = None,
):
    """
    Runs a simulation.

    Args:
        scenario (str, optional): name of the scenario to build. Defaults to "single_home".
        n_people (int, optional): population size in simulation. Defaults to 1000.
        start_time (datetime, optional): Initial calendar date. Defaults to April 1, 2020.
        simulation_days (int, optional): Number of days to run the simulation. Defaults to 60.
        seed (int, optional): seed of the model's random number generator. Defaults to 0.
        conf (dict): configuration of the experiment, see `configs/simulation/base.yaml`.
        logfile (str): filepath where the console output will be logged. Prints to the console only if None.

    Returns:
        model (epideux.model.Model): The model referencing people, locations, and the reports post-simulation.
    """
    if conf is None:
        conf = {}

    conf["scenario"] = scenario
    conf["n_people"] = n_people
    conf["start_time"] = start_time
    conf["simulation_days"] = simulation_days
    conf["seed"] = seed

    logging.root.setLevel(getattr(logging, conf.get("LOGGING_LEVEL", "WARNING").upper()))

    model = Model(
        seed=seed,
        start_date=start_time.date(),
        report_interval=datetime.timedelta(hours=conf.get("REPORT_INTERVAL_HOURS", DEFAULT_REPORT_INTERVAL_HOURS)),
    )
    build_scenario(model, conf)
    log(f"Initialized {len(model.persons)} persons in {len(model.locations)} locations", logfile)

    model.simulate(datetime.timedelta(days=simulation_days))

    nd = str(len(str(len(model.persons))))
    for report in model.get_daily_reports():
        day = "Day {:2}:".format((report.timestamp - model.env.initial_timestamp).days)
        log(f"{day} {report.timestamp} | S:{report.susceptible:<{nd}} E:{report.exposed:<{nd}} "
            f"I:{report.infectious:<{nd}} R:{report.recovered:<{nd}}", logfile)

    return model


if __name__ == "__main__":
    main()
