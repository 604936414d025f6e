"""
Page scripts used by the shadow piercer.

Shadow roots are only reachable from the page's own script context, so
every mutation runs in the browser. Mutation scripts share one prelude
and return ``{applied, seen, depth}`` so the caller can tell "nothing
matched" apart from "matched but could not be changed".
"""

# Shared helpers: apply(el, kind, value) sets value / checked / option
# and fires input + change so page listeners see the update.
MUTATION_PRELUDE = r"""
var MUTATORS = {
    value: function (el, value) {
        if (el.tagName !== 'INPUT' && el.tagName !== 'TEXTAREA') return false;
        el.value = value;
        return true;
    },
    checked: function (el) {
        if (!('checked' in el)) return false;
        el.checked = true;
        return true;
    },
    option: function (el, text) {
        if (!el.options) return false;
        for (var i = 0; i < el.options.length; i++) {
            if (el.options[i].text === text) {
                el.selectedIndex = i;
                return true;
            }
        }
        return false;
    }
};

function apply(el, kind, value) {
    if (!el || !MUTATORS[kind](el, value)) return false;
    el.dispatchEvent(new Event('input', {bubbles: true}));
    el.dispatchEvent(new Event('change', {bubbles: true}));
    return true;
}
"""

# arguments: hostTag, selector, kind, value
HOST_QUERY_SCRIPT = MUTATION_PRELUDE + r"""
var hostTag = arguments[0], selector = arguments[1], kind = arguments[2], value = arguments[3];
var hosts = document.querySelectorAll(hostTag);
var seen = 0;
for (var i = 0; i < hosts.length; i++) {
    var root = hosts[i].shadowRoot;
    if (!root) continue;
    var el = root.querySelector(selector);
    if (!el) continue;
    seen++;
    if (apply(el, kind, value)) return {applied: true, seen: seen, depth: 1};
}
return {applied: false, seen: seen, depth: null};
"""

# arguments: hostSelectors[], selector, kind, value
PATH_DESCENT_SCRIPT = MUTATION_PRELUDE + r"""
var hostSelectors = arguments[0], selector = arguments[1], kind = arguments[2], value = arguments[3];
var scope = document;
for (var i = 0; i < hostSelectors.length; i++) {
    var host = scope.querySelector(hostSelectors[i]);
    if (!host || !host.shadowRoot) return {applied: false, seen: 0, depth: i};
    scope = host.shadowRoot;
}
var el = scope.querySelector(selector);
if (!el) return {applied: false, seen: 0, depth: hostSelectors.length};
return {applied: apply(el, kind, value), seen: 1, depth: hostSelectors.length};
"""

# arguments: selector, kind, value, maxDepth
# Depth-first over open roots in document order, explicit stack, each host once.
SHADOW_SCAN_SCRIPT = MUTATION_PRELUDE + r"""
var selector = arguments[0], kind = arguments[1], value = arguments[2], maxDepth = arguments[3];
var visited = new Set();
var stack = [];
var seen = 0;
var top = document.querySelectorAll('*');
for (var i = top.length - 1; i >= 0; i--) {
    if (top[i].shadowRoot) stack.push([top[i], 1]);
}
while (stack.length) {
    var entry = stack.pop(), host = entry[0], depth = entry[1];
    if (visited.has(host)) continue;
    visited.add(host);
    var root = host.shadowRoot;
    var el = root.querySelector(selector);
    if (el) {
        seen++;
        if (apply(el, kind, value)) return {applied: true, seen: seen, depth: depth};
    }
    if (depth >= maxDepth) continue;
    var inner = root.querySelectorAll('*');
    for (var j = inner.length - 1; j >= 0; j--) {
        if (inner[j].shadowRoot && !visited.has(inner[j])) stack.push([inner[j], depth + 1]);
    }
}
return {applied: false, seen: seen, depth: null};
"""

# arguments: selector, kind, value
LIGHT_DOM_SCRIPT = MUTATION_PRELUDE + r"""
var selector = arguments[0], kind = arguments[1], value = arguments[2];
var el = document.querySelector(selector);
if (!el) return {applied: false, seen: 0, depth: 0};
return {applied: apply(el, kind, value), seen: 1, depth: 0};
"""

# arguments: knownHosts (comma-separated selector).
# Light-DOM elements with an open shadow root or a known host tag, in
# document order. Known tags are kept so closed hosts can be counted.
LIGHT_DOM_SHADOW_HOSTS = r"""
const known = arguments[0];
const hosts = [];
const walker = document.createTreeWalker(
    document.body || document.documentElement,
    NodeFilter.SHOW_ELEMENT,
    null,
    false
);
let node;
while (node = walker.nextNode()) {
    if (node.shadowRoot || (known && node.matches(known))) {
        hosts.push(node);
    }
}
return hosts;
"""

# arguments: host. Open shadow hosts inside host's own shadow root.
NESTED_SHADOW_HOSTS = r"""
var root = arguments[0].shadowRoot;
if (!root) return [];
return Array.from(root.querySelectorAll('*')).filter(function (el) {
    return !!el.shadowRoot;
});
"""

# arguments: id, closedHosts[]. Attribute match limited to elements whose
# root is the shadow root of one of closedHosts; a closed root's contents
# are only returned if the browser exposes them at this level.
ATTRIBUTE_SCAN_SCRIPT = r"""
var wanted = arguments[0], closedHosts = arguments[1];
var all = document.querySelectorAll('*');
for (var i = 0; i < all.length; i++) {
    var el = all[i];
    if (el.getAttribute('id') !== wanted) continue;
    var root = el.getRootNode();
    if (root === document || !root.host) continue;
    if (closedHosts.indexOf(root.host) !== -1) return el;
}
return null;
"""

# arguments: hostSelectors[], selector
FIND_AT_PATH_SCRIPT = r"""
var hostSelectors = arguments[0], selector = arguments[1];
var scope = document;
for (var i = 0; i < hostSelectors.length; i++) {
    var host = scope.querySelector(hostSelectors[i]);
    if (!host || !host.shadowRoot) return null;
    scope = host.shadowRoot;
}
return scope.querySelector(selector);
"""

# arguments: hostTags (comma-separated selector)
CENSUS_SCRIPT = r"""
var all = document.querySelectorAll('*');
var openHosts = [];
for (var i = 0; i < all.length; i++) {
    if (all[i].shadowRoot) openHosts.push(all[i].tagName.toLowerCase());
}
return {
    total: all.length,
    custom_hosts: document.querySelectorAll(arguments[0]).length,
    inputs: document.querySelectorAll('input').length,
    open_hosts: openHosts
};
"""
