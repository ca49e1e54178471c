import unittest
import numpy as np
import scipy.constants as con
import RaNoPy.maths.noise as mnoise
from RaNoPy.classes import DataType, Location, Mem, TelescopeModel
from RaNoPy.errors import ErrorCode, Status

BANDWIDTH = 1e6  # Hz
T_INT = 10.  # s
REL_ETOL = 1e-6  # Relative error tolerance as fraction of 'perfect' result


def expected_t_sys_rms(t_sys, area, efficiency, bandwidth, t_int):
    return (t_sys / (area * efficiency)) * 2. * con.k * 1e26 / \
        np.sqrt(2. * bandwidth * t_int)


class TestRadiometerEquation(unittest.TestCase):
    def test_sefd(self):
        self.assertAlmostEqual(mnoise.sefd(50., 100., 0.5),
                               2. * con.k * 50. / 50. * 1e26,
                               delta=REL_ETOL * 2. * con.k * 1e26)

    def test_sefd_default_efficiency(self):
        self.assertEqual(mnoise.sefd(30., 60.), mnoise.sefd(30., 60., 1.))

    def test_rms_from_sefd(self):
        self.assertAlmostEqual(mnoise.rms_from_sefd(2000., BANDWIDTH, T_INT),
                               2000. / np.sqrt(2e7))

    def test_arrays(self):
        t_sys = np.array([20., 40.])
        rms = mnoise.rms_from_sefd(mnoise.sefd(t_sys, 10.), BANDWIDTH, T_INT)
        np.testing.assert_allclose(rms, expected_t_sys_rms(t_sys, 10., 1.,
                                                           BANDWIDTH, T_INT))


class TestEvaluateRange(unittest.TestCase):
    def test_divisor_is_number_of_values(self):
        status = Status()
        values = Mem(DataType.DOUBLE)
        mnoise.evaluate_range(values, 4, 1., 5., status)
        self.assertFalse(status.failed)
        np.testing.assert_array_equal(values.data, [1., 2., 3., 4.])

    def test_strictly_increasing(self):
        for n in (1, 2, 7, 100):
            for type_ in (DataType.SINGLE, DataType.DOUBLE):
                status = Status()
                values = Mem(type_)
                mnoise.evaluate_range(values, n, 10., 20., status)
                self.assertFalse(status.failed)
                self.assertEqual(values.num_elements, n)
                self.assertTrue(np.all(np.diff(values.data) > 0))
                self.assertLess(values.data[-1], 20.)

    def test_zero_values(self):
        status = Status()
        values = Mem(DataType.DOUBLE, Location.CPU, 3)
        mnoise.evaluate_range(values, 0, 1., 5., status)
        self.assertFalse(status.failed)
        self.assertEqual(values.num_elements, 0)

    def test_bad_data_type(self):
        status = Status()
        values = Mem(DataType.INT)
        mnoise.evaluate_range(values, 4, 1., 5., status)
        self.assertEqual(status.code, ErrorCode.BAD_DATA_TYPE)
        self.assertEqual(values.num_elements, 0)

    def test_linear_in_buffer_precision(self):
        status = Status()
        values = Mem(DataType.SINGLE)
        mnoise.evaluate_linear(values, 3, 100e6, 0.1e6, status)
        self.assertEqual(values.data.dtype, np.float32)
        np.testing.assert_array_equal(
            values.data, np.array([100e6, 100.1e6, 100.2e6], dtype=np.float32)
        )


class TestSensitivityToRms(unittest.TestCase):
    def test_constant_sensitivity(self):
        for type_ in (DataType.SINGLE, DataType.DOUBLE):
            for n in (1, 5):
                status = Status()
                rms = Mem(type_)
                sens = Mem.from_array(np.full(n, 1500.), type_)
                mnoise.sensitivity_to_rms(rms, sens, n, BANDWIDTH, T_INT,
                                          status)
                self.assertFalse(status.failed)
                self.assertEqual(rms.num_elements, n)
                self.assertEqual(rms.type, type_)
                expected = 1500. / np.sqrt(2. * BANDWIDTH * T_INT)
                np.testing.assert_allclose(rms.data, expected, rtol=REL_ETOL)

    def test_linearity(self):
        sens = np.array([1000., 2000., 3500.])
        results = []
        for k in (1., 3.):
            status = Status()
            rms = Mem(DataType.DOUBLE)
            mnoise.sensitivity_to_rms(rms, Mem.from_array(sens * k), 3,
                                      BANDWIDTH, T_INT, status)
            self.assertFalse(status.failed)
            results.append(rms.to_numpy())
        np.testing.assert_allclose(results[1], 3. * results[0], rtol=1e-12)

    def test_type_mismatch(self):
        status = Status()
        rms = Mem(DataType.DOUBLE)
        sens = Mem.from_array([1., 2.], DataType.SINGLE)
        mnoise.sensitivity_to_rms(rms, sens, 2, BANDWIDTH, T_INT, status)
        self.assertEqual(status.code, ErrorCode.TYPE_MISMATCH)

    def test_dimension_mismatch_leaves_rms_untouched(self):
        status = Status()
        rms = Mem.from_array([9., 9., 9., 9.])
        sens = Mem.from_array([1., 2., 3.])
        mnoise.sensitivity_to_rms(rms, sens, 4, BANDWIDTH, T_INT, status)
        self.assertEqual(status.code, ErrorCode.DIMENSION_MISMATCH)
        np.testing.assert_array_equal(rms.data, [9., 9., 9., 9.])

    def test_bad_data_type(self):
        status = Status()
        rms = Mem(DataType.DOUBLE_COMPLEX)
        sens = Mem.from_array([1., 2.], DataType.DOUBLE_COMPLEX)
        mnoise.sensitivity_to_rms(rms, sens, 2, BANDWIDTH, T_INT, status)
        self.assertEqual(status.code, ErrorCode.BAD_DATA_TYPE)

    def test_invalid_argument(self):
        status = Status()
        mnoise.sensitivity_to_rms(Mem(DataType.DOUBLE), None, 2, BANDWIDTH,
                                  T_INT, status)
        self.assertEqual(status.code, ErrorCode.INVALID_ARGUMENT)

    def test_no_op_after_failure(self):
        status = Status()
        status.set(ErrorCode.FILE_IO)
        rms = Mem(DataType.DOUBLE)
        mnoise.sensitivity_to_rms(rms, Mem.from_array([1.]), 1, BANDWIDTH,
                                  T_INT, status)
        self.assertEqual(status.code, ErrorCode.FILE_IO)
        self.assertEqual(rms.num_elements, 0)


class TestTSysToRms(unittest.TestCase):
    def test_constant_inputs(self):
        t, a, e = 150., 700., 0.9
        for type_ in (DataType.SINGLE, DataType.DOUBLE):
            status = Status()
            rms = Mem(type_)
            mnoise.t_sys_to_rms(rms, Mem.from_array(np.full(3, t), type_),
                                Mem.from_array(np.full(3, a), type_),
                                Mem.from_array(np.full(3, e), type_),
                                3, BANDWIDTH, T_INT, status)
            self.assertFalse(status.failed)
            expected = expected_t_sys_rms(t, a, e, BANDWIDTH, T_INT)
            np.testing.assert_allclose(rms.data, expected, rtol=REL_ETOL)

    def test_inverse_efficiency(self):
        results = []
        for e in (0.8, 0.4):
            status = Status()
            rms = Mem(DataType.DOUBLE)
            mnoise.t_sys_to_rms(rms, Mem.from_array([100., 200.]),
                                Mem.from_array([500., 600.]),
                                Mem.from_array([e, e]),
                                2, BANDWIDTH, T_INT, status)
            self.assertFalse(status.failed)
            results.append(rms.to_numpy())
        np.testing.assert_allclose(results[1], 2. * results[0], rtol=1e-12)

    def test_type_mismatch(self):
        status = Status()
        rms = Mem(DataType.SINGLE)
        mnoise.t_sys_to_rms(rms, Mem.from_array([1.], DataType.SINGLE),
                            Mem.from_array([1.], DataType.DOUBLE),
                            Mem.from_array([1.], DataType.SINGLE),
                            1, BANDWIDTH, T_INT, status)
        self.assertEqual(status.code, ErrorCode.TYPE_MISMATCH)

    def test_dimension_mismatch(self):
        for lengths in ((1, 2, 2), (2, 1, 2), (2, 2, 1)):
            status = Status()
            rms = Mem(DataType.DOUBLE)
            mems = [Mem.from_array(np.ones(n)) for n in lengths]
            mnoise.t_sys_to_rms(rms, *mems, 2, BANDWIDTH, T_INT, status)
            self.assertEqual(status.code, ErrorCode.DIMENSION_MISMATCH)
            self.assertEqual(rms.num_elements, 0)


def _telescope(rms_per_station, freqs=(100e6, 200e6)):
    status = Status()
    telescope = TelescopeModel(DataType.DOUBLE, Location.CPU,
                               len(rms_per_station))
    for station, rms in zip(telescope.station, rms_per_station):
        station.noise.frequency.copy_from(Mem.from_array(freqs), status)
        station.noise.rms.copy_from(Mem.from_array(rms), status)
    assert not status.failed

    return telescope


class TestVisibilityNoise(unittest.TestCase):
    def test_baseline_indices(self):
        np.testing.assert_array_equal(mnoise.baseline_indices(3),
                                      [[0, 1], [0, 2], [1, 2]])
        self.assertEqual(mnoise.baseline_indices(1).shape, (0, 2))

    def test_station_rms_interpolation(self):
        status = Status()
        telescope = _telescope([[1., 3.], [2., 2.]])
        rms = mnoise.station_rms_at_frequencies(
            telescope, [100e6, 150e6, 300e6], status
        )
        self.assertFalse(status.failed)
        np.testing.assert_allclose(rms, [[1., 2., 3.], [2., 2., 2.]])

    def test_station_rms_without_values(self):
        status = Status()
        telescope = TelescopeModel(DataType.DOUBLE, Location.CPU, 2)
        rms = mnoise.station_rms_at_frequencies(telescope, 100e6, status)
        self.assertIsNone(rms)
        self.assertEqual(status.code, ErrorCode.SETUP_FAIL_TELESCOPE)

    def test_baseline_stddev(self):
        std = mnoise.baseline_stddev(np.array([[1.], [4.], [9.]]))
        np.testing.assert_allclose(std, [[2., 3., 6.]])

    def test_expected_image_rms(self):
        self.assertAlmostEqual(mnoise.expected_image_rms(10., 100), 1.)

    def test_add_system_noise_statistics(self):
        status = Status()
        telescope = _telescope([[1., 2.], [1., 2.], [4., 8.]])
        vis = np.zeros((4000, 2, 3), dtype=np.complex128)
        mnoise.add_system_noise(vis, telescope, [100e6, 200e6], 1, status)
        self.assertFalse(status.failed)
        expected = np.array([[1., 2., 2.], [2., 4., 4.]])
        np.testing.assert_allclose(vis.real.std(axis=0), expected, rtol=0.05)
        np.testing.assert_allclose(vis.imag.std(axis=0), expected, rtol=0.05)
        np.testing.assert_allclose(vis.real.mean(axis=0), 0., atol=0.3)

    def test_add_system_noise_reproducible(self):
        telescope = _telescope([[1., 2.], [3., 4.]])
        results = []
        for _ in range(2):
            status = Status()
            vis = np.zeros((5, 1, 1, 4), dtype=np.complex64)
            mnoise.add_system_noise(vis, telescope, 150e6, 7, status)
            self.assertFalse(status.failed)
            results.append(vis)
        np.testing.assert_array_equal(results[0], results[1])
        self.assertTrue(np.all(results[0] != 0.))

    def test_add_system_noise_errors(self):
        telescope = _telescope([[1., 2.], [3., 4.]])
        status = Status()
        mnoise.add_system_noise(np.zeros((2, 1, 1)), telescope, 150e6, 1,
                                status)
        self.assertEqual(status.code, ErrorCode.BAD_DATA_TYPE)

        status = Status()
        mnoise.add_system_noise(np.zeros((2, 1, 3), dtype=complex), telescope,
                                150e6, 1, status)
        self.assertEqual(status.code, ErrorCode.DIMENSION_MISMATCH)

        status = Status()
        gpu_telescope = TelescopeModel(DataType.DOUBLE, Location.GPU, 2)
        mnoise.add_system_noise(np.zeros((2, 1, 1), dtype=complex),
                                gpu_telescope, 150e6, 1, status)
        self.assertEqual(status.code, ErrorCode.BAD_LOCATION)


if __name__ == '__main__':
    unittest.main()
