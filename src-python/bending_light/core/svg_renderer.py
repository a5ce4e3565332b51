"""
Copyright 2026 bending-light authors and contributors

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import svgwrite
from shapely.geometry import box
from shapely.geometry.base import BaseGeometry

from .constants import MODEL_HEIGHT, MODEL_WIDTH, RAY_WIDTH


def rgb_string(color):
    r, g, b = color
    return f'rgb({int(r)},{int(g)},{int(b)})'


def power_to_opacity(power):
    """Map a ray power fraction to a stroke opacity, clipped to [0, 1]."""
    if power <= 0:
        return 0.0
    return min(1.0, max(0.0, power))


class SVGRenderer:
    """
    Debug SVG export of a propagation pass.

    Model coordinates are in meters and far too small for a drawing, so every
    point is multiplied by `scale` (pixels per meter) before it is written.
    The SVG is organized into layers, bottom to top:
    - media: medium regions (clipped to the view)
    - objects: prisms and the intensity sensor
    - rays: light rays
    - labels: normals and text annotations

    Coordinate System:
        Y-up (positive Y points upward), obtained with a vertical flip
        transformation on every layer.

    Attributes:
        width (int): Canvas width in pixels
        height (int): Canvas height in pixels
        view (tuple): Visible model region (min_x, min_y, width, height) in meters
        scale (float): Pixels per meter
        dwg (svgwrite.Drawing): The SVG drawing object
    """

    def __init__(self, width=800, height=560, view=None):
        """
        Args:
            width (int): Canvas width in pixels (default: 800)
            height (int): Canvas height in pixels (default: 560)
            view (tuple or None): Visible model region as (min_x, min_y, width,
                height) in meters. Defaults to the play area centered on the
                origin.
        """
        self.width = width
        self.height = height
        if view is None:
            view = (-MODEL_WIDTH / 2, -MODEL_HEIGHT / 2, MODEL_WIDTH, MODEL_HEIGHT)
        self.view = view
        self.scale = width / view[2]

        min_x, min_y, vb_width, vb_height = (v * self.scale for v in view)
        # Y-up viewbox flipped into SVG's Y-down system
        self.viewbox = (min_x, -(min_y + vb_height), vb_width, vb_height)

        self.dwg = svgwrite.Drawing(size=(f'{width}px', f'{height}px'),
                                    profile='full', debug=False)
        self.dwg.viewbox(*self.viewbox)
        self.dwg.add(self.dwg.rect(
            insert=(self.viewbox[0], self.viewbox[1]),
            size=(self.viewbox[2], self.viewbox[3]),
            fill='white'
        ))

        self.layer_media = self.dwg.add(self.dwg.g(id='layer-media', transform='scale(1, -1)'))
        self.layer_objects = self.dwg.add(self.dwg.g(id='layer-objects', transform='scale(1, -1)'))
        self.layer_rays = self.dwg.add(self.dwg.g(id='layer-rays', transform='scale(1, -1)'))
        self.layer_labels = self.dwg.add(self.dwg.g(id='layer-labels', transform='scale(1, -1)'))

    def _xy(self, point):
        """Model point to canvas coordinates, with -0.0 and tiny values snapped to 0."""
        x = point.x * self.scale
        y = point.y * self.scale
        return (0.0 if abs(x) < 1e-10 else x, 0.0 if abs(y) < 1e-10 else y)

    def _view_box(self) -> BaseGeometry:
        min_x, min_y, w, h = self.view
        return box(min_x, min_y, min_x + w, min_y + h)

    def _geometry_path(self, geom: BaseGeometry):
        """SVG path data for a shapely (Multi)Polygon, in canvas coordinates."""
        polygons = getattr(geom, 'geoms', [geom])
        parts = []
        for polygon in polygons:
            if polygon.is_empty or polygon.geom_type != 'Polygon':
                continue
            for ring in [polygon.exterior, *polygon.interiors]:
                coords = [(x * self.scale, y * self.scale) for x, y in ring.coords]
                parts.append('M ' + ' L '.join(f'{x:.4f},{y:.4f}' for x, y in coords) + ' Z')
        return ' '.join(parts)

    def draw_medium(self, medium, label=None):
        """Fill the part of a medium's region that lies in the view."""
        visible = medium.region.intersection(self._view_box())
        if visible.is_empty:
            return None
        element = self.dwg.path(
            d=self._geometry_path(visible),
            fill=rgb_string(medium.color),
            stroke='none',
        )
        element['data-substance'] = medium.substance.name
        if label:
            element['id'] = label
        self.layer_media.add(element)
        return element

    def draw_prism(self, prism, fill='cyan', fill_opacity=0.3, stroke='navy', stroke_width=1.0):
        element = self.dwg.path(
            d=self._geometry_path(prism.to_shapely()),
            fill=fill,
            fill_opacity=fill_opacity,
            stroke=stroke,
            stroke_width=stroke_width,
        )
        element['data-prism-type'] = prism.type_name
        self.layer_objects.add(element)
        return element

    def draw_ray(self, ray, stroke_width=None):
        """
        Draw a ray segment colored by wavelength, with opacity from its power.

        The stroke defaults to RAY_WIDTH in model units.
        """
        if stroke_width is None:
            stroke_width = RAY_WIDTH * self.scale
        line = self.dwg.line(
            start=self._xy(ray.tail),
            end=self._xy(ray.tip),
            stroke=rgb_string(ray.color),
            stroke_width=stroke_width,
            stroke_opacity=power_to_opacity(ray.power_fraction),
        )
        line['class'] = f'ray ray-{ray.role.value}'
        line['data-power'] = f'{ray.power_fraction:.6g}'
        line['data-wavelength-nm'] = f'{ray.wavelength_in_vacuum:.1f}'
        self.layer_rays.add(line)
        return line

    def draw_intersection(self, intersection, length=None, color='black'):
        """Draw a boundary hit and a short dashed segment along its normal."""
        if length is None:
            length = self.view[2] / 40
        start = intersection.point + intersection.unit_normal * length
        end = intersection.point - intersection.unit_normal * length
        line = self.dwg.line(start=self._xy(start), end=self._xy(end),
                             stroke=color, stroke_width=0.75, stroke_dasharray='4,2')
        line['class'] = 'normal'
        self.layer_labels.add(line)
        return line

    def draw_intensity_meter(self, meter, color='gray'):
        center = self._xy(meter.sensor_position)
        circle = self.dwg.circle(center=center, r=meter.radius * self.scale,
                                 fill='none', stroke=color, stroke_width=1.0)
        circle['class'] = 'intensity-sensor'
        self.layer_objects.add(circle)
        # Text is drawn in a flipped group so that it reads upright
        text = self.dwg.text(meter.reading.to_string(), insert=(center[0], -center[1]),
                             font_size='10px', fill=color, transform='scale(1, -1)')
        self.layer_labels.add(text)
        return circle

    def draw_scene(self, scene, result):
        """Draw the media, prisms, meter, rays and intersections of one pass."""
        mode = scene.mode
        if hasattr(mode, 'top_medium'):
            self.draw_medium(mode.top_medium, 'top-medium')
            self.draw_medium(mode.bottom_medium, 'bottom-medium')
            if mode.intensity_meter.enabled:
                self.draw_intensity_meter(mode.intensity_meter)
        else:
            for prism in mode.prisms:
                self.draw_prism(prism)
        for ray in result.rays:
            self.draw_ray(ray)
        for intersection in result.intersections:
            self.draw_intersection(intersection)

    def save(self, filename: str = None):
        """
        Save the SVG to a file.

        Args:
            filename (str): Output filename (default: 'output.svg')
        """
        if filename is None:
            filename = "output.svg"
        self.dwg.saveas(filename)

    def to_string(self):
        return self.dwg.tostring()
