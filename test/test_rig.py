import unittest
from pathlib import Path

from rigdef import RigParser, Severity
from rigdef.rig_model import BeamOption, NodeOption, PropSpecial, ShockOption, Vec3, WheelBraking

DEMO_TRUCK = Path(__file__).parent / "demo.truck"


class TestRigParser(unittest.TestCase):

    def setUp(self):
        self.parser = RigParser()
        self.doc = self.parser.parse_file(DEMO_TRUCK)
        self.root = self.doc.root_module
        return super().setUp()

    def test_header(self):
        self.assertEqual(self.doc.name, 'Demo Truck')
        self.assertTrue(self.doc.rescuer)
        self.assertFalse(self.doc.rollon)
        self.assertEqual(self.root.fileinfo[0].unique_id, '1234UID')
        self.assertEqual(self.root.fileinfo[0].category_id, 0)
        self.assertEqual(self.root.fileinfo[0].file_version, 1)
        self.assertEqual(self.root.author[0].type, 'chassis')
        self.assertEqual(self.root.author[0].forum_account_id, 1234)
        self.assertEqual(self.root.author[0].name, 'john_doe')
        self.assertEqual(self.root.description, ['A demo truck for tests'])
        self.assertEqual(self.root.globals[0].dry_mass, 1000.0)
        self.assertEqual(self.root.globals[0].material_name, 'semi_material')

    def test_nodes_and_beams(self):
        self.assertEqual(len(self.root.nodes), 5)
        self.assertEqual(self.root.nodes[1].id.num, 2)
        self.assertEqual(self.root.nodes[1].position, Vec3(1.0, 0.0, 0.0))
        self.assertTrue(self.root.nodes[3].options & NodeOption.LOAD_WEIGHT)
        self.assertEqual(self.root.nodes[3].load_weight_override, 80.0)

        self.assertEqual(len(self.root.beams), 3)
        self.assertEqual([str(n) for n in self.root.beams[0].nodes], ['1', '2'])
        self.assertEqual(self.root.beams[1].options, BeamOption.INVISIBLE)
        self.assertEqual(self.root.beams[2].extension_break_limit, 5.0)
        self.assertTrue(self.root.beams[0].defaults.is_user_defined)
        self.assertEqual(self.root.beams[0].defaults.springiness, 1000000.0)
        self.assertEqual(self.root.beams[0].defaults.visual_beam_diameter, 0.08)

    def test_shock_wheel_cinecam(self):
        self.assertEqual(self.root.shocks[0].options, ShockOption.INVISIBLE)
        self.assertEqual(self.root.shocks[0].long_bound, 1.5)

        wheel = self.root.wheels[0]
        self.assertEqual(wheel.num_rays, 12)
        self.assertTrue(wheel.rigidity_node.is_empty())
        self.assertEqual(wheel.braking, WheelBraking.FOOT_HAND)
        self.assertEqual(wheel.band_material_name, 'tracks_wheelband1')
        self.assertEqual(wheel.generated_node_ids, list(range(6, 30)))

        self.assertEqual(self.root.cinecam[0].generated_node_ids, [30])

    def test_engine(self):
        self.assertEqual(self.root.engine[0].torque, 500.0)
        self.assertEqual(self.root.engine[0].gear_ratios, [2.5, 1.5, 1.0])

    def test_user_module(self):
        self.assertEqual(list(self.doc.user_modules), ['Trailer'])
        trailer = self.doc.user_modules['Trailer']
        self.assertEqual(len(trailer.props), 1)
        self.assertEqual(trailer.props[0].special, PropSpecial.DASHBOARD_LEFT)
        self.assertIsNotNone(trailer.props[0].dashboard)
        self.assertEqual(len(self.root.props), 0)

    def test_no_diagnostics(self):
        self.assertEqual(self.parser.diagnostics.count(Severity.ERROR), 0)
        self.assertEqual(self.parser.diagnostics.count(Severity.WARNING), 0)

    def test_to_dict(self):
        data = self.doc.to_dict()
        self.assertEqual(data['name'], 'Demo Truck')
        self.assertEqual(len(data['root_module']['nodes']), 5)
        self.assertIn('Trailer', data['user_modules'])


if __name__ == '__main__':
    unittest.main()
