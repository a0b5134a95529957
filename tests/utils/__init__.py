from tests.utils.conf_setup import HYDRA_SIM_PATH, TEST_CONFIGS_PATH, get_default_names, get_test_conf
