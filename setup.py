# -*- coding: utf-8 -*-
from setuptools import setup

package_dir = \
{'': 'python'}

packages = \
['nat64_info',
 'nat64_info.datamodel',
 'nat64_info.datamodel.types',
 'nat64_info.utils',
 'nat64_info.utils.modeling']

install_requires = \
['dnspython>=2.0', 'pyyaml']

extras_require = \
{'test': ['pytest', 'pytest-asyncio']}

entry_points = \
{'console_scripts': ['nat64-info = nat64_info.main:main']}

setup_kwargs = {
    'name': 'nat64-info',
    'version': '1.0.0',
    'description': 'NAT64 prefix discovery and IPv4 to IPv6 address synthesis for IPv6-only networks',
    'long_description': "# nat64-info\n\nDiscovers the NAT64 prefix of the current network by comparing the A and AAAA answers for a probe host and synthesizes IPv6 addresses (RFC 6052) to reach IPv4-only hosts through the NAT64 gateway.\n\n```\n$ nat64-info translate 8.8.8.8\n8.8.8.8 -> 64:ff9b::808:808\n```\n",
    'long_description_content_type': 'text/markdown',
    'package_dir': package_dir,
    'packages': packages,
    'install_requires': install_requires,
    'extras_require': extras_require,
    'entry_points': entry_points,
    'python_requires': '>=3.10,<4.0',
}


setup(**setup_kwargs)
